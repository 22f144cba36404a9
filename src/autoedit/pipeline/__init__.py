"""Job orchestration and progress sinks."""
