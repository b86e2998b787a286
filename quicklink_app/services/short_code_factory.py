"""
Factory for creating short code generation strategies.
"""

from enum import Enum
from quicklink_app.services.short_code_strategies import (
    ShortCodeStrategy,
    RandomShortCodeStrategy,
    UrlDerivedShortCodeStrategy,
    SequentialShortCodeStrategy
)


class ShortCodeStrategyType(str, Enum):
    """Available short code generation strategies"""
    RANDOM = "random"
    URL_DERIVED = "url-derived"
    SEQUENTIAL = "sequential"


class ShortCodeFactory:
    """Factory for creating short code generation strategies"""
    
    _strategies = {
        ShortCodeStrategyType.RANDOM: RandomShortCodeStrategy,
        ShortCodeStrategyType.URL_DERIVED: UrlDerivedShortCodeStrategy,
        ShortCodeStrategyType.SEQUENTIAL: SequentialShortCodeStrategy,
    }
    
    @classmethod
    def create_strategy(
        cls,
        strategy_type: ShortCodeStrategyType,
        readable: bool = False
    ) -> ShortCodeStrategy:
        """
        Create a short code generation strategy.
        
        A fresh instance is returned on every call; the generator keeps the
        instances it needs so that stateful strategies (the sequential
        counter) live as long as the generator does.
        
        Args:
            strategy_type: Type of strategy to create (enum member or its value)
            readable: Use the readable charset instead of the full one
        
        Returns:
            A ShortCodeStrategy instance
        
        Raises:
            ValueError: If strategy_type is unknown
        """
        strategy_type = ShortCodeStrategyType(strategy_type)
        strategy_class = cls._strategies.get(strategy_type)
        if strategy_class is None:
            raise ValueError(f"Unknown strategy type: {strategy_type}")
        
        return strategy_class(readable=readable)
