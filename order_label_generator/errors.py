"""
Errors raised by the label generation pipeline.
"""


class LabelGenerationError(Exception):
	"""Base error with a message meant to be shown to the user."""

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class SourceReadError(LabelGenerationError):
	"""The input file could not be read as a spreadsheet."""


class SchemaError(LabelGenerationError):
	"""The product name header was not located."""


class EmptyResultError(LabelGenerationError):
	"""Headers were located but no product rows survived."""


class ConfigurationError(LabelGenerationError):
	"""The job configuration cannot produce any label."""
