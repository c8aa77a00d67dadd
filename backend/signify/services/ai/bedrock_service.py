"""
Bedrock Service (simulated)

Text-generation assistant for the AI assistant page. There is no live AWS
connection in this build; responses are canned and chosen by keyword.
"""
import logging
import os
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "anthropic.claude-3-sonnet-20240229-v1:0"
DEFAULT_MAX_TOKENS = 500

# Checked in order; first keyword found in the prompt wins
SIMULATED_RESPONSES = [
    (
        "network",
        "Based on the network analysis, the strongest links run between housing "
        "officers and youth workers. Individuals connected to several high-risk "
        "people are good candidates for coordinated case reviews.",
    ),
    (
        "connection",
        "The connection analysis shows clusters around shared caseworkers. "
        "Recommendations: 1) Hold joint case conferences for linked individuals "
        "2) Share safeguarding updates across the cluster 3) Nominate a lead "
        "professional for each family group.",
    ),
    (
        "data",
        "The data store holds well-organised case information across several "
        "categories. Suggested improvements: 1) Tag records by ward for local "
        "reporting 2) Review access levels per role 3) Schedule data quality checks.",
    ),
    (
        "risk",
        "Risk is driven mostly by recent accommodation changes and family "
        "breakdown events. Early intervention on temporary accommodation cases "
        "has the largest effect on the cumulative score.",
    ),
    (
        "housing",
        "Housing pressure is concentrated among young people leaving care and "
        "those in temporary accommodation. Prevention duty referrals should be "
        "opened within 56 days of a threatened loss of home.",
    ),
]

DEFAULT_RESPONSE = (
    "I've analysed your request. Signify gives a combined view of the people "
    "you support, their relationships and their risk history. Key insights: "
    "most risk escalations follow accommodation changes, and recorded "
    "remediation actions are concentrated on high-risk cases."
)


@dataclass
class BedrockResult:
    response: str
    is_simulated: bool
    model_used: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "response": self.response,
            "is_simulated": self.is_simulated,
            "model_used": self.model_used,
        }


class BedrockService:
    """Simulated AWS Bedrock text generation."""

    def __init__(self, region: str = None):
        self.region = region or os.getenv("AWS_REGION", "eu-west-2")
        logger.info("Using simulated AWS Bedrock service (demo mode, region %s)", self.region)

    @property
    def is_connected(self) -> bool:
        return False

    def invoke(
        self,
        prompt: str,
        model_id: str = DEFAULT_MODEL_ID,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> BedrockResult:
        prompt_lower = prompt.lower()
        text = next(
            (reply for keyword, reply in SIMULATED_RESPONSES if keyword in prompt_lower),
            DEFAULT_RESPONSE,
        )
        # Rough word budget standing in for the token limit
        words = text.split()
        if max_tokens and len(words) > max_tokens:
            text = " ".join(words[:max_tokens])

        return BedrockResult(
            response=text,
            is_simulated=True,
            model_used=f"{model_id} (simulated)",
        )

    def status(self) -> Dict[str, object]:
        return {
            "connected": self.is_connected,
            "mode": "Simulated",
            "message": "Running in simulation mode - responses are pre-configured for demo purposes",
        }
