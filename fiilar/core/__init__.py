"""Shared configuration, security and cross-cutting helpers."""
