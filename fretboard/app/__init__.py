"""
App Subpackage - Command Line Interface

Usage:
    fretboard chord Cmaj7 "F#m7b5" Am/G
    fretboard scale "D dorian" --position 1
    fretboard validate
"""
