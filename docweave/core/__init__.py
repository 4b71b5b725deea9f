# Subpackages are imported explicitly, e.g. `from docweave.core.generator import Generator`,
# so that reflection can be used without loading the generator.
