from car_doctor.main import run

run()
