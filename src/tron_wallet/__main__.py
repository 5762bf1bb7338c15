from tron_wallet.cli.app import app

if __name__ == "__main__":
    app()
