"""State management utilities for Event Poster Studio UI.

This module handles the initialization and management of UI state, in
particular the lazily created Gemini service.
"""

import logging

from eventposter.core.config import config
from eventposter.core.gemini_service import GeminiPosterService

from .models import UIState

logger = logging.getLogger(__name__)


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Creates the Gemini service from the session key (or the configured key)
    the first time it is needed.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance

    Raises:
        MissingApiKeyError: If no API key is available
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info("Initializing GeminiPosterService")
    state.service = GeminiPosterService(api_key=state.api_key, config=config)
    logger.info(f"UIState initialization complete: {state}")
    return state


def set_session_api_key(state: UIState, api_key: str) -> UIState:
    """Store an API key for this session and drop any existing service."""
    state.api_key = api_key
    state.service = None
    logger.info("Session API key updated")
    return state


def needs_api_key(state: UIState) -> bool:
    """True when neither the session nor the configuration has a key."""
    return not (state.api_key or config.gemini_api_key)

