from offer_relay.main import run

run()
