# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_USAGE = 2  # Bad command line (raised by click itself)
EXIT_DATAERR = 65  # Benchmark output was malformed
EXIT_NOINPUT = 66  # A baseline slot was never seeded
EXIT_UNAVAILABLE = 69  # Pushing or commenting failed
EXIT_SOFTWARE = 70  # Build, server or benchmark failed
EXIT_IOERR = 74  # Local file could not be read or written
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad skyreport.toml, missing token)
