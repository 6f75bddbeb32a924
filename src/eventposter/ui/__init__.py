"""Gradio browser UI for Event Poster Studio.

Modules
-------
app
    Builds the Blocks layout and wires every event (``create_ui``).
components
    Reusable speaker and logo widgets.
handlers
    Event handlers grouped by feature area.
models
    Per-session ``UIState`` and the UI choice constants.
state
    Lazy creation of the Gemini service for a session.
validation
    Checks on uploaded files and typed API keys.
"""
