"""Conector Turnstile - verificação de desafio humano."""

from .verify import TurnstileVerifier

__all__ = ["TurnstileVerifier"]
