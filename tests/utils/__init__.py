"""Tests for utils module.

Test Files and Coverage:
========================

| Test File           | Test Classes         | Tested Constructs                 | Tested Functionalities                    |
|---------------------|----------------------|-----------------------------------|-------------------------------------------|
| test_hasher.py      | HasherTest           | compute_digests(), HashAlgorithm  | Digests, chunking, both mode, failures    |
| test_walker.py      | FileContextTest      | FileContext                       | Lazy lstat, file types, hidden names      |
|                     | ListDirectoryTest    | list_directory()                  | Flat listing, missing folder              |
| test_profiling.py   | ProfilingTest        | profile_main()                    | Env var handling, profile dump            |
"""
