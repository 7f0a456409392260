"""
Chunk Renderer Test Suite

Structure:
- unit/: serializer, uploader, renderer, config, CLI and logging in isolation
- integration/: uploads over a loopback socket to a local receiver
"""
