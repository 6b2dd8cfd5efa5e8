"""
Registry Module - Black Box Interface

Purpose: Administrator-curated table of permitted external programs
Interface: ProgramRegistry (resolve, iteration), ProgramEntry
Hidden: Configuration validation, selector normalisation

Entries are fixed at load time and never derived from user input.
"""
