"""
Core application engine for orchestrating an archive run.

`run_batch` acquires the lock and validates the environment, then the
`ArchivePipeline` streams the snatch list and delegates each entry to the
`MetadataResolver` and the `DownloadOrchestrator`.
"""
