from latencytest.main import main

main()
