# Sample handlers
from lambda6.handlers.greeting import GreetingHandler

__all__ = ["GreetingHandler"]
