"""A2S protocol engine: codec, framing, reassembly, handshake and decoders"""
