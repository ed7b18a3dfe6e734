"""condenser — turn a full match recording into a condensed highlight reel.

An upstream analyzer emits a time-ordered list of scored events. This
package validates each event against the source video, cuts the matching
sub-ranges, captions them, and concatenates everything into one
re-encoded mp4.
"""
