"""
Executor Module - Black Box Interface

Purpose: Run an external program over a buffer
Interface: run_filter(argv, data, timeout, cancel_event) -> PipeResult
Hidden: Pipe handling, deadline enforcement, process cleanup

Can be replaced with different execution mechanisms (sandboxed runners, remote workers).
"""
