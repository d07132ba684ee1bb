"""Models, conditions and v1alpha4/v1beta1 conversion for Nutanix Cluster API infrastructure resources."""

__version__ = "0.1.0"

__all__ = ["conditions", "conversion", "meta", "v1alpha4", "v1beta1"]