"""
Factory for creating short code generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from typing import Dict, Optional

from shorturl_service.services.short_code_strategies import (
    ShortCodeStrategy,
    UniformRandomShortCodeStrategy,
    ByteModuloShortCodeStrategy
)
from shorturl_service.config import settings


class ShortCodeStrategyType(Enum):
    """Available short code generation strategies"""
    UNIFORM = "uniform"
    BYTE_MODULO = "byte_modulo"


class ShortCodeFactory:
    """Factory for creating short code generation strategies with caching"""

    _instances: Dict[ShortCodeStrategyType, ShortCodeStrategy] = {}

    @classmethod
    def create_strategy(
        cls,
        strategy_type: Optional[ShortCodeStrategyType] = None
    ) -> ShortCodeStrategy:
        """
        Create or return cached short code generation strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of a ShortCodeStrategy

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = ShortCodeStrategyType(settings.short_code_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == ShortCodeStrategyType.UNIFORM:
            instance = UniformRandomShortCodeStrategy(length=settings.short_url_length)
        elif strategy_type == ShortCodeStrategyType.BYTE_MODULO:
            instance = ByteModuloShortCodeStrategy(length=settings.short_url_length)
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance

    @classmethod
    def clear_instances(cls):
        """Clear cached instances (for testing)"""
        cls._instances.clear()
