"""
ClearCue — skin consultation core.

Architecture: Prompt → Model reply → Extraction & Validation → Document Layout
Philosophy:  Trust the model to write. Trust only code to decide the shape.
"""

__version__ = "1.0.0"
