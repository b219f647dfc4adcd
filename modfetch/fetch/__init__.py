"""
Fetching modules into the cache with the go command.

Submodules:
    protocol  how the go command is invoked and how its exit status is treated
    runner    subprocess invocation
    report    parsing of the go command's stderr
    resolver  the cache-or-fetch resolution entry point
"""
