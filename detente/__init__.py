"""
Detente - Decision-Resolution Engine for a Cold War Card Game

A deterministic engine for two-player play between agents. It provides:
- A flat action space covering every kind of choice
- Pending-decision resolution with trivial-move shortcuts
- Seedable and scripted randomness for self-play and replay
- Agent policies and an HTTP API for running games
"""

__version__ = "0.1.0"
