from .energetics import energy_report

__all__ = ['energy_report']
