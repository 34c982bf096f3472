"""Websocket push delivery."""
