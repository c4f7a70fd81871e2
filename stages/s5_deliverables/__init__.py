from .deliverable_stager import DeliverableStager

__all__ = ["DeliverableStager"]
