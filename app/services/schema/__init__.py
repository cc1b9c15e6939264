"""Schema services - keep backing tables in their declared shape."""

from app.services.schema.reconciler import SchemaReconciler

__all__ = ["SchemaReconciler"]
