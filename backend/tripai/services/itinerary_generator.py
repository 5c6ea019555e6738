"""AI itinerary generation.

Builds the Portuguese-language prompt for a trip, sends it to the configured
provider exactly once and validates whatever comes back. Nothing here touches
the database: a generated itinerary only becomes a Trip when the caller saves
it.
"""

import logging
from typing import Optional

from tripai.errors import GenerationFailed, ProviderUnavailable, TripAIError, ValidationError
from tripai.schemas.itinerary import Itinerary
from tripai.services.ai_service import AIBackend
from tripai.services.itinerary_validator import validate_itinerary

logger = logging.getLogger(__name__)

DEFAULT_BUDGET_LABEL = "Moderado"

# Largest value a SQL INTEGER column accepts
MAX_DB_INTEGER = 2**63 - 1


ITINERARY_TEMPLATE = """{
  "destination": "Nome do Destino",
  "country": "País",
  "region": "Região/Continente",
  "summary": "Breve resumo do roteiro",
  "month": "Mês e Ano sugerido",
  "totalActivities": <número total de atividades>,
  "days": [
    {
      "day": 1,
      "title": "Título do Dia",
      "subtitle": "Breve descrição das atividades do dia",
      "morning": {
        "title": "Atividade da Manhã",
        "description": "Descrição detalhada...",
        "estimatedCost": <custo em reais>
      },
      "afternoon": {
        "title": "Atividade da Tarde",
        "description": "Descrição detalhada...",
        "estimatedCost": <custo em reais>
      },
      "evening": {
        "title": "Atividade da Noite",
        "description": "Descrição detalhada...",
        "estimatedCost": <custo em reais>
      },
      "dayTotal": <soma dos custos do dia>
    }
  ]
}"""


def _budget_sentence(
    budget_min: Optional[int],
    budget_max: Optional[int],
    budget_label: Optional[str],
) -> str:
    if budget_min is None or budget_max is None:
        return ""
    label = budget_label or DEFAULT_BUDGET_LABEL
    return f" Orçamento total estimado: de R$ {budget_min} a R$ {budget_max} ({label})."


def build_itinerary_prompt(
    destination: str,
    days: int,
    budget_min: Optional[int] = None,
    budget_max: Optional[int] = None,
    budget_label: Optional[str] = None,
) -> str:
    """Build the single natural-language request sent to the provider."""
    budget = _budget_sentence(budget_min, budget_max, budget_label)
    return (
        "Você é um especialista em viagens. Gere um roteiro de viagem detalhado "
        "em português brasileiro.\n\n"
        f"Gere um roteiro de {days} dias para {destination}.{budget} "
        "Inclua atividades pela manhã, tarde e noite com custos estimados em "
        "reais brasileiros.\n\n"
        "Retorne SOMENTE um objeto JSON válido no seguinte formato exato, "
        "sem nenhum texto antes ou depois:\n"
        f"{ITINERARY_TEMPLATE}"
    )


def check_trip_params(destination: Optional[str], days) -> tuple[str, int]:
    """Return the trimmed destination and day count, or raise ValidationError."""
    destination = (destination or "").strip()
    if not destination:
        raise ValidationError("Destination is required.")
    if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= MAX_DB_INTEGER:
        raise ValidationError("Number of days must be a positive integer.")
    return destination, days


def check_budget(budget_min: Optional[int], budget_max: Optional[int]) -> None:
    for value in (budget_min, budget_max):
        if value is not None and value < 0:
            raise ValidationError("Budget values cannot be negative.")
        if value is not None and value > MAX_DB_INTEGER:
            raise ValidationError("Budget value is too large.")
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise ValidationError("Minimum budget cannot exceed maximum budget.")


class ItineraryGenerator:
    def __init__(self, backend: Optional[AIBackend]):
        self.backend = backend

    async def generate(
        self,
        destination: Optional[str],
        days,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
        budget_label: Optional[str] = None,
    ) -> Itinerary:
        """Generate a fresh itinerary.

        Raises:
            ValidationError: bad trip parameters.
            ProviderUnavailable: no provider is configured.
            QuotaExceeded / GenerationFailed: the provider call failed.
            MalformedResponse / SchemaError: provider output is unusable.
        """
        destination, days = check_trip_params(destination, days)
        check_budget(budget_min, budget_max)

        if self.backend is None:
            logger.error("Itinerary generation requested but no provider is configured")
            raise ProviderUnavailable()

        prompt = build_itinerary_prompt(destination, days, budget_min, budget_max, budget_label)
        try:
            raw = await self.backend.complete(prompt)
        except TripAIError:
            raise
        except Exception as e:
            logger.error(f"Provider call failed for '{destination}': {type(e).__name__}: {e}")
            raise GenerationFailed()

        itinerary = validate_itinerary(raw)
        if len(itinerary.days) != days:
            logger.warning(
                f"Requested {days} day(s) for '{destination}', provider returned "
                f"{len(itinerary.days)}"
            )
        return itinerary
