"""Turn loosely structured chatbot responses into themed HTML fragments.

Entry point: ChatFormatter.message_renderer.format_message. Submodules are not
imported here so the CLI can load .env before config reads the environment.
"""
