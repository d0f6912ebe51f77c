"""
The Supervisor package.
Starts the application server and the reverse proxy and ties their lifecycles together.

The ProcessSupervisor owns the state machine; process_utils spawns processes,
shutdown signals them, and startup builds a supervisor from the settings.
"""
from .process_utils import ManagedProcess, ProcessSpec
from .state import SupervisorResult, SupervisorState
from .supervisor import ProcessSupervisor

__all__ = ['ManagedProcess', 'ProcessSpec', 'ProcessSupervisor', 'SupervisorResult', 'SupervisorState']
