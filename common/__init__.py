"""
Shared pieces for the chunk renderer.

- types.py: chunk constants, the ChunkData capability, ArrayChunk
- logging_setup.py: JSON logging for services and scripts
"""
