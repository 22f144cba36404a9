"""Render-time EDL repair and ffmpeg rendering."""
