"""
Engine process layer.

This module provides:
- EngineHandle: binary, scratch home and version flavor
- ProcessInvoker: one engine call with stream capture
- KeyringManager: scratch public/private keyrings
- Invocation flavors for legacy and loopback-pinentry engines
"""

from pgp_engine.process.flavor import LegacyFlavor, LoopbackFlavor, select_flavor
from pgp_engine.process.handle import EngineHandle, detect_version
from pgp_engine.process.invoker import ProcessInvoker, encode_input
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.protocol import InvocationFlavor, Invoker

__all__ = [
    "EngineHandle",
    "InvocationFlavor",
    "Invoker",
    "KeyringManager",
    "LegacyFlavor",
    "LoopbackFlavor",
    "ProcessInvoker",
    "detect_version",
    "encode_input",
    "select_flavor",
]
