from .base import Custody
from .memory import InMemoryCustody, Transfer
from .http import HttpCustody

__all__ = ["Custody", "InMemoryCustody", "Transfer", "HttpCustody"]
