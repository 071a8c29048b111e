from sdmverify.core.base.backend import Backend, handles
from sdmverify.core.base.logging import PROTOCOL, TRACE
from sdmverify.core.base.message import Message, Result

__all__ = ["Backend", "Message", "PROTOCOL", "Result", "TRACE", "handles"]
