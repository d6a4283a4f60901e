from conversion.synchronizer import TableSynchronizer

__all__ = ["TableSynchronizer"]
