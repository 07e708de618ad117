from multicast_beacon.cli import app

if __name__ == "__main__":
    app()
