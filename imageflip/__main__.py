from imageflip.cli import run

run()
