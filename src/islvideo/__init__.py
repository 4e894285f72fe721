"""islvideo — speech or text to Indian Sign Language video.

Resolve each word of a cleaned English sentence to a pre-recorded sign
clip from a dataset directory and splice the clips into one video.
"""
