from bbb_stress.main import run

run()
