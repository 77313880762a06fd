from .agent_loop import EMPTY_RESPONSE_FALLBACK, MAX_ITERATIONS_REACHED, AgentLoop, LoopConfig

__all__ = ["AgentLoop", "LoopConfig", "MAX_ITERATIONS_REACHED", "EMPTY_RESPONSE_FALLBACK"]
