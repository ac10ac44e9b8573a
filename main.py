"""Run the areacodes CLI from a source checkout: `python main.py lookup 212`."""

from areacodes.cli import main

if __name__ == "__main__":
    main()
