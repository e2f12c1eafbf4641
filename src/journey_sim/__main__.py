from journey_sim.cli import main

main()
