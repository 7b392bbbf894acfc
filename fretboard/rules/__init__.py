"""
Rules Subpackage

The resolution engine:
    - theory.py: Pitch classes, tuning, chord formulas and note spelling
    - qualities.py / enharmonics.py / scale_modes.py: Input normalization
    - descriptor_parser.py: Chord and scale names to structured parts
    - voicing_store.py: The chord table with exact lookup
    - fallback.py: Substitute voicings when a chord is not stored
    - slash_bass.py: Slash-chord bass adjustment
    - chord_library.py: The chord pipeline
    - scale_library.py: Scale descriptors, positions and transposition
    - validation.py: Developer checks over the tables
"""
