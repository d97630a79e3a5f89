"""
Track Solo - Per-track MIDI practice files.

Takes a multi-track Standard MIDI File and produces one copy per track in
which every other track is played more quietly, bundled into a single ZIP
archive.  The core pipeline lives in ``tracksolo.services``; a small FastAPI
service and a command-line script sit on top of it.
"""
