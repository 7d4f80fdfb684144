"""AI layer: provider clients, generation façade, prompt runner."""
from .ai_generator import AIGenerator
from .llm import check_connection, generate, generate_stream, list_local_models

__all__ = ["AIGenerator", "check_connection", "generate", "generate_stream", "list_local_models"]
