"""Schema API views - thin layer over the reconciler."""

from app.container import Container

from .schemas import FailureItem, ReconcileResponse, RegistryResponse, TableItem


def reconcile_schema(container: Container) -> ReconcileResponse:
    """Bring every sheet to its declared shape."""
    report = container.reconciler.reconcile()

    return ReconcileResponse(
        fingerprint=container.registry.fingerprint,
        changes=report.changes,
        failures=[FailureItem(table=f.table, message=f.message) for f in report.failures],
        changed=bool(report.changes),
    )


def get_registry(container: Container) -> RegistryResponse:
    """Describe the declared schema."""
    registry = container.registry
    tables = []
    for spec in registry:
        target = registry.uuid_target_for(spec.name)
        tables.append(
            TableItem(
                name=spec.name,
                columns=list(spec.required_columns),
                uuid_column=target.column if target else None,
            )
        )
    return RegistryResponse(fingerprint=registry.fingerprint, tables=tables)
