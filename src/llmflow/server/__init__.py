"""HTTP surface for the dispatcher."""

from llmflow.server.app import GatewayService, create_app, main

__all__ = ['GatewayService', 'create_app', 'main']
