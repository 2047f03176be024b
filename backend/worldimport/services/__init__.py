"""Use cases: importing an exported batch and seeding relation rows."""
