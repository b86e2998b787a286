"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import hashlib
import random
import time
from abc import ABC, abstractmethod
from typing import Optional


# Full alphanumeric alphabet (62 characters)
FULL_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Drops the visually ambiguous 0, O, 1, l and I (57 characters)
READABLE_CHARSET = "".join(c for c in FULL_CHARSET if c not in "0O1lI")

BASE36_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""
    
    def __init__(self, readable: bool = False):
        self.characters = READABLE_CHARSET if readable else FULL_CHARSET
    
    @abstractmethod
    def generate(self, length: int, url: Optional[str] = None) -> str:
        """
        Generate a candidate short code.
        
        Uniqueness is not checked here; the generator runs the
        collision policy around the strategy.
        
        Args:
            length: Number of characters to produce
            url: The URL being shortened (only some strategies use it)
            
        Returns:
            A candidate short code string
        """
        pass
    
    def _random_chars(self, length: int) -> str:
        return ''.join(random.choice(self.characters) for _ in range(length))


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Draws every character uniformly from the charset.
    
    Pros: Simple, unpredictable
    Cons: Collision risk grows with the number of stored codes
    """
    
    def generate(self, length: int, url: Optional[str] = None) -> str:
        """Generate random short code"""
        return self._random_chars(length)


class UrlDerivedShortCodeStrategy(ShortCodeStrategy):
    """
    Deterministic code derived from an MD5 digest of the URL.
    
    Each digest byte is mapped onto a charset index, so the same URL always
    yields the same candidate. Retrying after a collision reproduces that
    candidate, which is why a colliding URL ends up on the generator's
    widened random fallback.
    
    Pros: Repeatable, no state
    Cons: Every collision is permanent for that URL
    """
    
    def generate(self, length: int, url: Optional[str] = None) -> str:
        if not url:
            raise ValueError("URL required for url-derived strategy")
        
        digest = hashlib.md5(url.encode("utf-8")).digest()
        
        # Wrap around the 16 digest bytes for codes longer than the digest
        return ''.join(
            self.characters[digest[i % len(digest)] % len(self.characters)]
            for i in range(length)
        )


class SequentialShortCodeStrategy(ShortCodeStrategy):
    """
    Timestamp plus a wrapping counter, both base36 encoded.
    
    The combined string is cut to its last `length` characters; shorter
    results are left-padded with random characters.
    
    Pros: Rarely collides within one process
    Cons: Predictable, leaks creation time
    """
    
    COUNTER_MODULUS = 10000
    
    def __init__(self, readable: bool = False):
        super().__init__(readable)
        self.counter = random.randrange(1000)
    
    def generate(self, length: int, url: Optional[str] = None) -> str:
        self.counter = (self.counter + 1) % self.COUNTER_MODULUS
        timestamp_ms = int(time.time() * 1000)
        combined = self._base36_encode(timestamp_ms) + self._base36_encode(self.counter)
        
        code = combined[-length:]
        if len(code) < length:
            code = self._random_chars(length - len(code)) + code
        
        return code
    
    def _base36_encode(self, number: int) -> str:
        """Convert a non-negative integer to a lowercase base36 string"""
        if number == 0:
            return BASE36_CHARS[0]
        
        result = ""
        while number > 0:
            result = BASE36_CHARS[number % 36] + result
            number //= 36
        
        return result
