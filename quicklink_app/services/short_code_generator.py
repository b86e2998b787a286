"""
Short code generator with collision handling.

Wraps the generation strategies with the retry policy:

1. Ask the strategy for a candidate
2. Check it against the caller's existence predicate
3. On collision retry, up to max_attempts candidates
4. If every attempt collided, draw one random code two characters longer
   and accept it without checking

Step 4 is best effort: the widened space makes a collision very unlikely,
but not impossible.
"""

import logging
import re
from typing import Callable, Dict, Optional, Tuple

from pydantic import BaseModel, Field

from quicklink_app.services.short_code_factory import ShortCodeFactory, ShortCodeStrategyType
from quicklink_app.services.short_code_strategies import (
    FULL_CHARSET,
    SequentialShortCodeStrategy,
    ShortCodeStrategy,
)

logger = logging.getLogger(__name__)

SHORTCODE_MIN_LENGTH = 3
SHORTCODE_MAX_LENGTH = 20
SHORTCODE_REGEX = r"^[A-Za-z0-9_-]+$"
SHORTCODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

ExistsCheck = Callable[[str], bool]


class GenerationOptions(BaseModel):
    """Options for a single generate() call"""
    
    # Capped two below the shortcode maximum so the widened fallback stays valid
    length: int = Field(6, ge=SHORTCODE_MIN_LENGTH, le=SHORTCODE_MAX_LENGTH - 2)
    strategy: ShortCodeStrategyType = ShortCodeStrategyType.RANDOM
    url: Optional[str] = None
    readable: bool = False
    max_attempts: int = Field(10, ge=1)


class ShortCodeGenerator:
    """Generates unique short codes under pluggable strategies"""
    
    def __init__(self):
        # One instance per (strategy, charset) so stateful strategies keep state
        self._strategies: Dict[Tuple[ShortCodeStrategyType, bool], ShortCodeStrategy] = {}
    
    def generate(
        self,
        options: Optional[GenerationOptions] = None,
        exists_check: Optional[ExistsCheck] = None,
    ) -> str:
        """
        Generate a short code.
        
        Args:
            options: Generation options (defaults: random, length 6)
            exists_check: Predicate returning True when a code is taken.
                          Without it the first candidate is returned.
        
        Returns:
            A short code
        
        Raises:
            ValueError: If the url-derived strategy is requested without a URL
        """
        options = options or GenerationOptions()
        
        if options.strategy == ShortCodeStrategyType.URL_DERIVED and not options.url:
            raise ValueError("URL required for url-derived strategy")
        
        strategy = self._get_strategy(options.strategy, options.readable)
        attempts = 0
        
        while True:
            attempts += 1
            shortcode = strategy.generate(options.length, options.url)
            
            if exists_check is None or not exists_check(shortcode):
                break
            
            logger.info(f"Collision detected for {shortcode}, retrying... (attempt {attempts})")
            
            if attempts >= options.max_attempts:
                logger.warning(
                    f"Max attempts ({options.max_attempts}) reached, "
                    f"generating longer random code"
                )
                fallback = self._get_strategy(ShortCodeStrategyType.RANDOM, options.readable)
                shortcode = fallback.generate(options.length + 2)
                break
        
        logger.debug(
            f"Generated shortcode: {shortcode} "
            f"(strategy: {options.strategy.value}, attempts: {attempts})"
        )
        return shortcode
    
    def _get_strategy(self, strategy_type: ShortCodeStrategyType, readable: bool) -> ShortCodeStrategy:
        key = (strategy_type, readable)
        if key not in self._strategies:
            self._strategies[key] = ShortCodeFactory.create_strategy(strategy_type, readable=readable)
        return self._strategies[key]
    
    @staticmethod
    def is_valid(shortcode) -> bool:
        """Check that a code is a 3-20 character string of [A-Za-z0-9_-]"""
        if not shortcode or not isinstance(shortcode, str):
            return False
        
        if not SHORTCODE_MIN_LENGTH <= len(shortcode) <= SHORTCODE_MAX_LENGTH:
            return False
        
        return SHORTCODE_PATTERN.fullmatch(shortcode) is not None
    
    def get_stats(self) -> dict:
        """Code-space figures for the full charset, plus the sequential counter"""
        counter = None
        for strategy in self._strategies.values():
            if isinstance(strategy, SequentialShortCodeStrategy):
                counter = strategy.counter
                break
        
        charset_length = len(FULL_CHARSET)
        return {
            "charset": FULL_CHARSET,
            "charset_length": charset_length,
            "possible_combinations": {
                "length4": charset_length ** 4,
                "length6": charset_length ** 6,
                "length8": charset_length ** 8,
            },
            "counter": counter,
        }
