"""dotnetdiag: talk to the .NET runtime diagnostics IPC endpoint."""

__version__ = "0.1.0"
