"""
Application Layer

Contains the session controller and the ports it drives.
This layer orchestrates domain objects and infrastructure adapters.

Structure:
- services/: Session controller, progress ticker and command outcomes
- interfaces/: Port interfaces for infrastructure adapters
"""
