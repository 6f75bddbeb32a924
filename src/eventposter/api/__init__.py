"""Event Poster Studio: FastAPI REST API layer.

This package contains the FastAPI application and the Pydantic request and
response models.  The Gradio UI is mounted into the same application.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
"""
