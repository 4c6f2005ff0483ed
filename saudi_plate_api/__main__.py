from saudi_plate_api.main import run

run()
