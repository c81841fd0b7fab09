"""
Simulation module for running the global path node on a PC without hardware.

Components:
- SimulatedVehicle: Bicycle-model vehicle following the published path
"""

from .vehicle import SimulatedVehicle, VehicleConfig

__all__ = [
    'SimulatedVehicle',
    'VehicleConfig',
]
