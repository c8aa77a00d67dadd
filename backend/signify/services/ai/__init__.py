"""Simulated AWS AI services"""

from .bedrock_service import BedrockService, BedrockResult
from .comprehend_service import ComprehendService, AnalysisResult

__all__ = [
    'BedrockService',
    'BedrockResult',
    'ComprehendService',
    'AnalysisResult',
]
