"""
Data Subpackage - Table Schemas and Loaders

The YAML tables live next to this file:
    - chord_voicings.yaml: root -> quality -> voicings
    - generic_shapes.yaml: one movable shape per quality
    - scale_patterns.yaml: intervals and position fingerings per scale
"""

from fretboard.data.schema import ChordResolution, ScalePattern, ScaleResolution, Voicing
