from ridecore.main import main

main()
